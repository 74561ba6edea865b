"""Shared fixtures for the static site unit tests."""

from __future__ import annotations

import copy
from typing import Any, Callable

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from site_infra.stacks.site_stack import StaticSiteStack


BASE_CONTEXT: dict[str, Any] = {
    "site": {
        "base_name": "unit-test-site",
        "region": "eu-west-1",
        "env": "dev",
        "dev": {"force_destroy": True},
        "main": {"force_destroy": False},
    }
}


@pytest.fixture
def make_app() -> Callable[..., cdk.App]:
    """Build an App with the base site context, optionally overridden."""

    def _make(site: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None) -> cdk.App:
        context = copy.deepcopy(BASE_CONTEXT)
        if site:
            context["site"].update(site)
        context.update(overrides or {})
        return cdk.App(context=context)

    return _make


@pytest.fixture
def make_template(make_app) -> Callable[..., Template]:
    """Synthesize a StaticSiteStack and return its template."""

    def _make(site: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None) -> Template:
        app = make_app(site, overrides)
        stack = StaticSiteStack(
            app,
            "TestSiteStack",
            env=cdk.Environment(account="123456789012", region="eu-west-1"),
        )
        return Template.from_stack(stack)

    return _make


@pytest.fixture
def template(make_template) -> Template:
    return make_template()


@pytest.fixture
def logical_id() -> Callable[[Template, str, dict], str]:
    """Return a lookup of the logical id of the single resource matching props."""

    def _lookup(template: Template, resource_type: str, props: dict) -> str:
        found = template.find_resources(resource_type, {"Properties": props})
        assert len(found) == 1, f"expected one {resource_type} matching {props}, got {list(found)}"
        return next(iter(found))

    return _lookup
