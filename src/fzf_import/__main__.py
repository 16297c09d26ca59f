import sys

from fzf_import.cli import main


sys.exit(main())
