"""
TestContext - subject, registry helpers, injection and property lookup.
"""

import warnings

import pytest

from modulefor import ManagedObject, TestContext, module_for, set_resolver_registry
from modulefor.testing import running


XFoo = ManagedObject.extend()
Thing = ManagedObject.extend()
OtherThing = ManagedObject.extend()


def default_entries():
    return {
        "component:x-foo": XFoo,
        "foo:thing": Thing,
        "service:other-thing": OtherThing,
    }


class TestSubject:

    @pytest.mark.asyncio
    async def test_subject_created_with_first_props(self):
        set_resolver_registry({"component:x-foo": XFoo})
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            subject = ctx.subject(name="Max")
            assert subject.name == "Max"
            assert ctx.subject(name="Moritz") is subject
            assert subject.name == "Max"
            assert ctx.has_subject

    @pytest.mark.asyncio
    async def test_subject_is_stored_in_module_cache(self):
        set_resolver_registry({"component:x-foo": XFoo})
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            subject = ctx.subject()
            assert module.cache["subject"] is subject

    @pytest.mark.asyncio
    async def test_subject_never_created(self):
        set_resolver_registry({"component:x-foo": XFoo})
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            assert not ctx.has_subject
        assert "subject" not in module.cache

    @pytest.mark.asyncio
    async def test_string_form(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            assert isinstance(ctx, TestContext)
            assert str(ctx) == "test context for: component:x-foo"


class TestRegistryHelpers:

    @pytest.mark.asyncio
    async def test_register_and_factory(self):
        Blah = ManagedObject.extend(purpose="blabbering")
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            ctx.register("service:blah", Blah)
            assert ctx.factory("service:blah") is Blah
            assert ctx.container.lookup("service:blah").purpose == "blabbering"

    @pytest.mark.asyncio
    async def test_factory_hidden_from_isolated_module(self):
        set_resolver_registry(default_entries())
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            assert ctx.factory("foo:thing") is None

    @pytest.mark.asyncio
    async def test_factory_visible_in_integration_module(self):
        set_resolver_registry(default_entries())
        module = module_for("component:x-foo", integration=True)

        async with running(module) as ctx:
            assert ctx.factory("foo:thing") is Thing

    @pytest.mark.asyncio
    async def test_context_owner(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            assert ctx.get_owner() is module.container


class TestInject:

    @pytest.mark.asyncio
    async def test_inject_service(self):
        Blah = ManagedObject.extend(purpose="blabbering")
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            ctx.register("service:blah", Blah)
            ctx.inject.service("blah")
            assert ctx.get("blah").purpose == "blabbering"

    @pytest.mark.asyncio
    async def test_inject_service_as(self):
        Blah = ManagedObject.extend(purpose="blabbering")
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            ctx.register("service:blah", Blah)
            ctx.inject.service("blah", as_="hello")
            assert ctx.get("hello").purpose == "blabbering"
            assert not ctx.has("blah")

    @pytest.mark.asyncio
    async def test_inject_invisible_service_stores_none(self):
        set_resolver_registry(default_entries())
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            assert ctx.inject.service("other-thing") is None
            assert ctx.has("other-thing")


class TestPropertyLookup:

    @pytest.mark.asyncio
    async def test_own_properties_do_not_deprecate(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            ctx.set("name", "Max")
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                assert ctx.get("name") == "Max"
            assert ctx.get("missing", "fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_module_property_fallback_deprecates(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            with pytest.warns(
                DeprecationWarning,
                match='Accessing the test module property "subject_name" from a callback is deprecated.',
            ):
                assert ctx.get("subject_name") == "component:x-foo"

    @pytest.mark.asyncio
    async def test_callbacks_fallback_deprecates(self):
        module = module_for("component:x-foo", answer=42)

        async with running(module) as ctx:
            with pytest.warns(DeprecationWarning, match='callbacks property "answer"'):
                assert ctx.get("answer") == 42

    @pytest.mark.asyncio
    async def test_integration_option_not_readable(self):
        module = module_for("component:x-foo", integration=True)

        async with running(module) as ctx:
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                assert ctx.get("integration") is None
            assert module.is_integration

    @pytest.mark.asyncio
    async def test_deprecations_as_errors(self, settings_override):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            with settings_override(deprecations="error"):
                with pytest.raises(DeprecationWarning):
                    ctx.get("description")

    @pytest.mark.asyncio
    async def test_deprecations_ignored(self, settings_override):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            with settings_override(deprecations="ignore"):
                with warnings.catch_warnings():
                    warnings.simplefilter("error")
                    assert ctx.get("description") == "component:x-foo"

    @pytest.mark.asyncio
    async def test_helper_call_does_not_deprecate(self):
        def greet(ctx, greeting):
            return f"{greeting}, {ctx.subject().name}"

        set_resolver_registry({"component:x-foo": XFoo})
        module = module_for("component:x-foo", greet=greet)

        async with running(module) as ctx:
            ctx.subject(name="Max")
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                assert ctx.call("greet", "Hello") == "Hello, Max"

    @pytest.mark.asyncio
    async def test_call_unknown_helper(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            with pytest.raises(AttributeError):
                ctx.call("nope")


class TestClear:

    @pytest.mark.asyncio
    async def test_context_cleared_after_teardown(self):
        module = module_for("component:x-foo")

        async with running(module) as ctx:
            ctx.set("name", "Max")

        assert not ctx.has("name")
        with pytest.raises(AttributeError):
            ctx.container
