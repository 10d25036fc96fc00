"""Archive the live thumbnail of a Twitch channel when it goes online."""
