"""Allows `python -m seo_engine`."""

import sys

from seo_engine.server import main

sys.exit(main())
