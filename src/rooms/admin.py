from django.contrib import admin

from .models import Room, Booking


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'space', 'capacity', 'created_at')
    list_filter = ('space', 'created_at')
    search_fields = ('id', 'name', 'space')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('name',)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-mostly view; status changes go through the API so they are checked and mailed."""
    list_display = (
        'id', 'room', 'user_email', 'date', 'start_time', 'end_time',
        'type', 'status', 'created_at'
    )

    # Filter/search for moderation
    list_filter = (
        'status',
        'type',
        'room',
        'date',
        'created_at',
    )
    date_hierarchy = 'date'
    search_fields = ('room__name', 'user__email', 'cancellation_reason')
    autocomplete_fields = ('room', 'user')
    readonly_fields = ('status', 'cancellation_reason', 'created_at', 'updated_at')
    ordering = ('-created_at',)
    list_select_related = ('room', 'user')

    @admin.display(ordering='user__email', description='User')
    def user_email(self, obj):
        return getattr(obj.user, 'email', None)
