from django.urls import path
from . import views

app_name = 'groups'

urlpatterns = [
    # GET    /api/groups/?user_id=       - List user's groups
    # POST   /api/groups/                - Create group
    # GET    /api/groups/{id}/           - Group details with expenses
    # POST   /api/groups/join/           - Request to join with join code
    # POST   /api/groups/approve-join/   - Approve a join request
    path('', views.group_list, name='group-list'),
    path('join/', views.join_group, name='group-join'),
    path('approve-join/', views.approve_join_request, name='group-approve-join'),
    path('<uuid:pk>/', views.group_detail, name='group-detail'),
]
