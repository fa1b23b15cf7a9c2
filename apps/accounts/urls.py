from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # POST /api/users/login/       - Login or auto-create by device id
    # GET  /api/users/{id}/        - User details
    path('login/', views.login, name='login'),
    path('<uuid:pk>/', views.user_detail, name='user-detail'),
]
