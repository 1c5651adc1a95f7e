#!/usr/bin/env python3
"""
Basic Generation Example
========================

This example generates the page object for a single page and uses it
without writing any code, through ArtifactPage.

Usage:
    python examples/basic_generation.py
"""

from pageforge import GeneratorConfig, PageParser
from pageforge.core import browser_session
from pageforge.layers.action import ArtifactPage
from pageforge.layers.generate import OperationKind


def main():
    """Generate and exercise a page object for the TodoMVC demo."""

    print("=" * 60)
    print("pageforge - Basic Generation Example")
    print("=" * 60)
    print()

    config = GeneratorConfig(headless=False)

    with browser_session(headless=config.headless) as driver:
        driver.get("https://demo.playwright.dev/todomvc/")

        parser = PageParser(driver, config)
        count = parser.parse_page()
        print(f"Collected {count} elements")

        artifact = parser.generate_pom()
        print(f"Generated {artifact.class_name} in {artifact.package}")
        print()

        for spec in artifact.elements:
            methods = ", ".join(op.method_name for op in spec.operations)
            print(f"  {spec.field_name:<24} {spec.role.value:<10} {methods}")

        print()
        print("-" * 40)
        print(parser.render_pom())

        # Bind the artifact to the live page and drive it
        page = ArtifactPage(driver, artifact)
        text_fields = [spec for spec in artifact.elements if spec.operation(OperationKind.SET_VALUE)]
        if text_fields:
            page.perform(text_fields[0].field_name, OperationKind.SET_VALUE, "Buy milk")
            print(f"Typed into {text_fields[0].field_name}")


if __name__ == "__main__":
    main()
