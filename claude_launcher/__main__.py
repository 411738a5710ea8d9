import sys

from claude_launcher.cli import main

sys.exit(main())
