"""
OpenAPI Schema Dereferencer

Entry point for the component dereferencing script.
"""

from schema_dereferencer.cli.generator import DereferenceGenerator


def main() -> None:
    """
    Entry point for the component dereferencing script.

    Creates DereferenceGenerator instance and runs the dereferencing process.
    """
    generator = DereferenceGenerator()
    generator.run()


if __name__ == "__main__":
    main()
