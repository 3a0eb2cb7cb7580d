import sys

from i18next_test.cli import main

sys.exit(main())
