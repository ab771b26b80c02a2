"""Socket event handlers.

Every handler has the shape ``async (state, identity, payload) ->
HandlerResult`` and never touches the transport directly, so it can be
exercised without a live socket.
"""
