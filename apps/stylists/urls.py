from django.urls import path
from . import views

app_name = 'stylists'

urlpatterns = [
    path('',                                 views.stylist_list,     name='list'),
    path('<uuid:stylist_id>/schedule/',      views.stylist_schedule, name='schedule'),
]
