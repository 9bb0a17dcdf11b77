"""Discord slash commands (/channel, /image, /bot).

This package contains the three command cogs that form the bot's slash
command interface:

- :mod:`routebot.commands.channel` -- ``/channel setai``, ``/channel setai-remove``
- :mod:`routebot.commands.image` -- ``/image generate``, ``/image set-image``, ``/image remove-image``
- :mod:`routebot.commands.general` -- ``/bot uptime|ping|help|feedback|support|invite``

Load all cogs during bot startup::

    for ext in COMMAND_EXTENSIONS:
        await bot.load_extension(ext)
"""

COMMAND_EXTENSIONS: list[str] = [
    "routebot.commands.channel",
    "routebot.commands.image",
    "routebot.commands.general",
]
