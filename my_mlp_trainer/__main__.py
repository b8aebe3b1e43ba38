import sys

from my_mlp_trainer.cli import main

sys.exit(main())
