from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    # POST /api/expenses/             - Submit expense
    # POST /api/expenses/approve/     - Approve expense
    # GET  /api/expenses/{id}/        - Expense details
    path('', views.create_expense, name='expense-create'),
    path('approve/', views.approve_expense, name='expense-approve'),
    path('<uuid:pk>/', views.expense_detail, name='expense-detail'),
]
