#!/usr/bin/env python3
"""
scoresplit CLI - Find instrument parts in multi-part sheet-music PDFs

Commands:
  Configuration:
    scoresplit init                      Create config.yaml with defaults
    scoresplit config show               Show configuration
    scoresplit config set <key> <value>  Set a configuration value

  Parts:
    scoresplit detect <pdf>              Detect part boundaries from the text layer
    scoresplit validate <json> --pages N Validate cutting instructions
    scoresplit plan <pdf>                Build the full cut plan
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from cli import main


if __name__ == '__main__':
    main()
