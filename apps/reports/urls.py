from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Student payment report
    path('payments/', views.payment_report, name='payment-report'),
    path('payments/periods/', views.billing_periods, name='billing-periods'),
    path('payments/at-risk/', views.at_risk_students, name='at-risk-students'),
    path('payments/export/', views.export_payment_report, name='export-payment-report'),
]
