from esquery.cli import app


def main() -> None:
    """Run the command line renderer."""
    app(prog_name="esquery")


if __name__ == "__main__":
    main()
