from rest_framework.pagination import PageNumberPagination


class BookingPagination(PageNumberPagination):
    """Page-number pagination for booking lists."""
    page_size = 20                      # default items per page
    page_size_query_param = 'page_size' # allow ?page_size=
    max_page_size = 100                 # safety cap
