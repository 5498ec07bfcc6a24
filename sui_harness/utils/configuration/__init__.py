from sui_harness.utils.configuration.settings import HarnessConfig

__all__ = ["HarnessConfig"]
