"""Allow ``python -m create_rext <project-name>``."""

from create_rext.pipeline import main

if __name__ == "__main__":
    main()
