from django.contrib import admin

from .models import Chat
from .models import ChatParticipant
from .models import Message


class ChatParticipantInline(admin.TabularInline):
    model = ChatParticipant
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ("id", "created_at", "updated_at")
    inlines = [ChatParticipantInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "room", "chat", "created_at")
    search_fields = ("content", "sender__username")
    raw_id_fields = ("sender", "room", "chat")
    readonly_fields = ("created_at",)
