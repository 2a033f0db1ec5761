"""Desktop live view built with PySide6 and pyqtgraph.

:class:`~weatherpoll.gui.live_window.LiveWindow` draws buffer snapshots on the
Qt thread; :mod:`application` owns the event loop and connects the window to
the acquisition loop running in the background.
"""
