"""runtime switches, set by the command line"""

import os

SHOULD_LOG_SCOPE = False
SHOULD_LOG_TOKENS = False

# point the rendered tree page at ./echarts.min.js instead of the CDN
LOCAL_ECHARTS = False

DEFAULT_DFA = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'dfa.json')
