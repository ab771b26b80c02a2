"""Realtime gateway (Socket.IO).

One python-socketio server carries pod room chat, direct chats, typing and
presence signals and per-user notification channels. Event handlers are plain
async functions in ``handlers``; ``socketio.Gateway`` applies what they return
to the transport.
"""
