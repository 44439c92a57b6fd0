from .mock_payment_gateway import MockPaymentGateway
from .razorpay_gateway import RazorpayGateway

__all__ = ["MockPaymentGateway", "RazorpayGateway"]
