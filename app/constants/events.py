"""Notification event catalog. Names are a wire contract; do not rename."""

EVENT_NEW_CHAT_REQUEST = "chat.request.new"
EVENT_CHAT_ACCEPTED = "chat.request.accepted"
EVENT_CHAT_REJECTED = "chat.request.rejected"
EVENT_NEW_MESSAGE = "chat.message.new"
EVENT_MESSAGE_DELIVERED = "chat.message.delivered"
EVENT_MESSAGE_READ = "chat.message.read"
EVENT_CONVERSATION_CREATED = "chat.conversation.created"
EVENT_CONVERSATION_UPDATED = "chat.conversation.updated"
EVENT_USER_ONLINE = "chat.user.online"
EVENT_USER_OFFLINE = "chat.user.offline"
