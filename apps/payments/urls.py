from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # Deposit or balance intent → gateway order
    path('intents/', views.create_intent, name='create_intent'),

    # Poll the gateway and store the outcome
    path('intents/<uuid:intent_id>/confirm/', views.confirm_intent, name='confirm_intent'),
]
