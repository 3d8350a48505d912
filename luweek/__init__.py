"""
luweek – Lancaster University term week labels for date formatting.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
