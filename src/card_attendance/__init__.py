"""Card & attendance engine.

Field devices report NFC card taps, admins bind cards to students and run events,
and check-ins are recorded against the single active event. Organized by feature
module (cards, events, registrations, attendance, ...) with a thin Flask controller
layer over service/repository layers.
"""
