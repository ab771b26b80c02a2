from django.contrib import admin

from .models import Pod
from .models import PodMember
from .models import Room
from .models import RoomMember


class PodMemberInline(admin.TabularInline):
    model = PodMember
    extra = 0
    raw_id_fields = ("user",)


class RoomMemberInline(admin.TabularInline):
    model = RoomMember
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Pod)
class PodAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "owner", "created_at")
    search_fields = ("name", "owner__username")
    raw_id_fields = ("owner",)
    inlines = [PodMemberInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "pod", "type", "is_private", "created_at")
    list_filter = ("type", "is_private")
    search_fields = ("name", "pod__name")
    inlines = [RoomMemberInline]
