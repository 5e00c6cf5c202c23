from django_filters import rest_framework as df

from ..models import Booking, Room


class BookingFilter(df.FilterSet):
    status = df.ChoiceFilter(choices=Booking.Status.choices)
    type = df.ChoiceFilter(choices=Booking.Type.choices)
    room = df.NumberFilter(field_name='room_id')
    date = df.DateFilter(field_name='date')
    date_from = df.DateFilter(field_name='date', lookup_expr='gte')
    date_to = df.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = Booking
        fields = ['status', 'type', 'room', 'date', 'date_from', 'date_to']


class RoomFilter(df.FilterSet):
    name = df.CharFilter(field_name='name', lookup_expr='icontains')
    space = df.CharFilter(field_name='space', lookup_expr='icontains')
    capacity_min = df.NumberFilter(field_name='capacity', lookup_expr='gte')

    class Meta:
        model = Room
        fields = ['name', 'space', 'capacity_min']
