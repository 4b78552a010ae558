"""
__main__.py
-----------
Entry point: ``python -m birddash`` or the ``birddash`` console script.
"""

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.main_loop import MainLoop


def main():
    DebugLogger.section("BirdDash")
    MainLoop().run()


if __name__ == "__main__":
    main()
