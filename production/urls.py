from django.urls import path

from . import views

app_name = "production"

urlpatterns = [
    path("new/", views.item_create, name="create"),
    path("move/", views.board_move, name="move"),
    path("<uuid:pk>/", views.item_costing, name="costing"),
]
