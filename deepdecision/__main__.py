"""Allow running as ``python -m deepdecision``."""

from deepdecision.api.cli.main import main

if __name__ == "__main__":
    main()
