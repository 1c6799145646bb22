"""Allow ``python -m abacus_trainer``."""

from abacus_trainer.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
