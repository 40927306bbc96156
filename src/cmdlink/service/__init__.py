"""Command service for cmdlink.

An HTTP server that receives a single command per request, forwards it
to a bot and returns the bot's answer. Also reports a status snapshot of
the managed bots.
"""
