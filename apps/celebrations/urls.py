from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'celebrations'

# Router for ViewSets
router = SimpleRouter()
router.register(r'', views.CelebrationViewSet, basename='celebration')

urlpatterns = [
    # Celebration ViewSet routes
    # GET    /api/celebrations/                          - List (celebrant excluded)
    # POST   /api/celebrations/                          - Create (admin)
    # GET    /api/celebrations/{id}/                     - Detail

    # Custom celebration actions
    # GET    /api/celebrations/{id}/history/             - Gift Leader history
    # POST   /api/celebrations/{id}/reassign_leader/     - Reassign Gift Leader (admin)
    # POST   /api/celebrations/{id}/complete/            - Complete (admin)
    # GET    /api/celebrations/{id}/contributions/       - Contributions + totals
    # POST   /api/celebrations/{id}/contribute/          - Add or update own contribution
    # DELETE /api/celebrations/{id}/contribute/          - Withdraw own contribution

    # Additional endpoints
    path('budget/<uuid:group_id>/', views.group_budget, name='group-budget'),

    # Include router URLs
    path('', include(router.urls)),
]
