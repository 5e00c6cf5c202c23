from rest_framework.pagination import PageNumberPagination


class AuditLogPagination(PageNumberPagination):
    """Page-number pagination for audit logs."""
    page_size = 50
    page_size_query_param = 'limit'
    max_page_size = 200
