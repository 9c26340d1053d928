"""
Terminal shell for the stand-up session engine.

Commands:
- standup roster list/add/remove/toggle/shuffle/reset/import/export
- standup timer start/stop/status
- standup pick
- standup backlog list/add/toggle/remove/clear
"""
