from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'wishlists'

# Router for ViewSets
router = SimpleRouter()
router.register(r'items', views.ItemClaimViewSet, basename='item')
router.register(r'claims', views.ClaimViewSet, basename='claim')

urlpatterns = [
    # Item claim actions
    # POST   /api/items/{id}/claim/          - Claim the whole item
    # POST   /api/items/{id}/open_split/     - Open a split
    # POST   /api/items/{id}/pledge/         - Pledge toward the split
    # POST   /api/items/{id}/close_split/    - Cover the remaining amount
    # GET    /api/items/{id}/split_status/   - Split progress
    # GET    /api/items/claim_summary/       - Claim counts (?items=...)
    # GET    /api/items/claims/              - Visible claims (?items=...)
    # GET    /api/items/my_status/           - Owner-safe status (?items=...)

    # Claim routes
    # DELETE /api/claims/{id}/               - Release a claim

    path('', include(router.urls)),
]
