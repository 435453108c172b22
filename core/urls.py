"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("home/", views.home, name="home"),
    path("about/", views.about, name="about"),
    path("preferences/theme/", views.toggle_theme_view, name="toggle_theme"),
    path("preferences/drawer/", views.toggle_drawer_view, name="toggle_drawer"),
    path("buses/", views.buses, name="buses"),
    path("buses/register/", views.register_bus, name="register_bus"),
    path("buses/<str:asset_no>/", views.bus_detail, name="bus_detail"),
    path("buses/<str:asset_no>/repair/", views.repair_asset, name="repair_asset"),
    path("buses/<str:asset_no>/adjust-value/", views.adjust_asset_value, name="adjust_asset_value"),
    path("buses/<str:asset_no>/scrap/", views.scrap_asset, name="scrap_asset"),
    path("buses/<str:asset_no>/restore/", views.restore_asset, name="restore_asset"),
]
