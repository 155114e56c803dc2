import sys

from tetris_ocr.cli import main


sys.exit(main())
