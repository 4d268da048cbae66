import sys

from recordflow.cli.pipeline_cli import main

sys.exit(main())
