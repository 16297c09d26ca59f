"""Runtime helpers: subprocess sessions and signal wiring."""

from fzf_import.runtime.session import SearchSession
from fzf_import.runtime.signals import install_cancel_signals


__all__ = ["SearchSession", "install_cancel_signals"]
