"""
Shared infrastructure: logging, configuration, main-loop timers and IPC.
"""
