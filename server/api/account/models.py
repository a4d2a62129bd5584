# Account models
# Wire shapes of the caller's own order history and loyalty data

from db.models import LoyaltyData, OrdersPage

MyOrdersResponse = OrdersPage
LoyaltyResponse = LoyaltyData
