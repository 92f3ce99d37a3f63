"""Allow running as: python -m requisition_portal"""

from requisition_portal.main import run, serve
import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        serve()
    else:
        filter_arg = sys.argv[1] if len(sys.argv) > 1 else "all"
        run(filter_arg)
