from __future__ import annotations

import pytest

from wppb.naming import camel_case, is_valid_slug, pascal_snake_case, slugify, version_constant


@pytest.mark.parametrize(
    "slug, camel, pascal, constant",
    [
        ("my-plugin", "myPlugin", "My_Plugin", "MY_PLUGIN_VERSION"),
        ("sample", "sample", "Sample", "SAMPLE_VERSION"),
        ("my-2d-plugin", "my2dPlugin", "My_2d_Plugin", "MY_2D_PLUGIN_VERSION"),
        ("a-b-c", "aBC", "A_B_C", "A_B_C_VERSION"),
    ],
)
def test_slug_variants_are_consistent(slug, camel, pascal, constant):
    assert camel_case(slug) == camel
    assert pascal_snake_case(slug) == pascal
    assert version_constant(slug) == constant


@pytest.mark.parametrize(
    "value, expected",
    [
        ("sample-plugin", True),
        ("plugin2", True),
        ("Sample-Plugin", False),
        ("sample_plugin", False),
        ("../escape", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_slug(value, expected):
    assert is_valid_slug(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Sample Plugin", "sample-plugin"),
        ("   My    Plugin  ", "my-plugin"),
        ("Café Menu!", "cafe-menu"),
        ("snake_case name", "snake-case-name"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected
