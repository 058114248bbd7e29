"""Shared fixtures for coverage tests: PHP sources and Clover documents."""

from collections.abc import Callable

import pytest

ROOT = "/tmp/build"

BAR_PHP = """<?php

namespace Foo;

class Bar
{
    private $name;

    public function __construct($name)
    {
        $this->name = $name;
    }

    public function getName()
    {
        return $this->name;
    }
}
"""

# getName declares a closure; PHPUnit reports it as a second getName method
CLOSURE_PHP = """<?php

namespace Foo;

class Bar
{
    public function getName()
    {
        $format = function ($value) {
            return strtoupper($value);
        };

        return $format('bar');
    }
}
"""

TWO_CLASSES_PHP = """<?php

namespace Foo;

class First
{
    public function alpha()
    {
        return 1;
    }

    public function beta()
    {
        return function () {
            return 2;
        };
    }
}

class Second
{
    public function gamma()
    {
        return 3;
    }
}
"""

PROJECT_METRICS = (
    '<metrics files="1" loc="17" ncloc="15" classes="1" methods="2" coveredmethods="1"'
    ' conditionals="0" coveredconditionals="0" statements="3" coveredstatements="2"'
    ' elements="5" coveredelements="3"/>'
)


def class_metrics(
    methods: int,
    covered_methods: int,
    statements: int = 2,
    covered_statements: int = 1,
) -> str:
    return (
        f'<metrics methods="{methods}" coveredmethods="{covered_methods}"'
        f' conditionals="0" coveredconditionals="0"'
        f' statements="{statements}" coveredstatements="{covered_statements}"'
        f' elements="{methods + statements}"'
        f' coveredelements="{covered_methods + covered_statements}"/>'
    )


def clover(body: str, project_metrics: str = PROJECT_METRICS) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<coverage generated="1700000000">'
        f'<project timestamp="1700000000">{body}{project_metrics}</project>'
        "</coverage>"
    )


@pytest.fixture
def root_dir() -> str:
    return ROOT


@pytest.fixture
def make_clover() -> Callable[..., str]:
    return clover


@pytest.fixture
def make_class_metrics() -> Callable[..., str]:
    return class_metrics


@pytest.fixture
def bar_report() -> str:
    """Clover report for BAR_PHP: both methods, __construct uncovered."""
    return clover(
        f'<package name="Foo"><file name="{ROOT}/src/Bar.php">'
        f'<class name="Bar" namespace="Foo">{class_metrics(2, 1, 2, 1)}</class>'
        '<line num="9" type="method" name="__construct" crap="2" count="0"/>'
        '<line num="11" type="stmt" count="0"/>'
        '<line num="14" type="method" name="getName" crap="1" count="3"/>'
        '<line num="16" type="stmt" count="3"/>'
        "</file></package>"
    )


@pytest.fixture
def closure_report() -> Callable[[int], str]:
    """Clover report for CLOSURE_PHP; the closure entry's hit count is a parameter."""

    def build(closure_count: int) -> str:
        return clover(
            f'<package name="Foo"><file name="{ROOT}/src/Bar.php">'
            f'<class name="Bar" namespace="Foo">{class_metrics(2, 2, 3, 3)}</class>'
            '<line num="7" type="method" name="getName" crap="1" count="1"/>'
            f'<line num="9" type="method" name="getName" crap="1" count="{closure_count}"/>'
            f'<line num="10" type="stmt" count="{closure_count}"/>'
            '<line num="13" type="stmt" count="1"/>'
            "</file></package>"
        )

    return build


@pytest.fixture
def two_classes_report() -> str:
    """Clover report for TWO_CLASSES_PHP; the closure in beta is reported as a method."""
    return clover(
        f'<package name="Foo"><file name="{ROOT}/src/Both.php">'
        f'<class name="First" namespace="Foo">{class_metrics(3, 2)}</class>'
        f'<class name="Second" namespace="Foo">{class_metrics(1, 0)}</class>'
        '<line num="7" type="method" name="alpha" crap="1" count="1"/>'
        '<line num="9" type="stmt" count="1"/>'
        '<line num="12" type="method" name="beta" crap="1" count="1"/>'
        '<line num="14" type="method" name="beta" crap="1" count="0"/>'
        '<line num="22" type="method" name="gamma" crap="1" count="0"/>'
        '<line num="24" type="stmt" count="0"/>'
        "</file></package>"
    )


@pytest.fixture
def bar_php() -> str:
    return BAR_PHP


@pytest.fixture
def closure_php() -> str:
    return CLOSURE_PHP


@pytest.fixture
def two_classes_php() -> str:
    return TWO_CLASSES_PHP
