"""Webhook command handlers."""

from app.commands.webhooks.channel_webhook_command import ChannelWebhookCommand

__all__ = ["ChannelWebhookCommand"]
