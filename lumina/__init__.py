"""
Lumina - desktop query router.

Usage:
    from lumina.search import QueryResolver
    from lumina.ai import SessionManager, QueueSink
    from lumina.actions import ActionExecutor

    results = await QueryResolver().resolve("how do I rename a file")
    outcome = await ActionExecutor(SessionManager(QueueSink())).execute(results[0])
"""

__version__ = "0.1.0"
