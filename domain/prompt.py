# domain/prompt.py

"""
Textes fixes échangés avec l'IA et affichés à l'utilisateur.
"""

PRODUCT_DESCRIPTION_PROMPT = "Give a product title and short description for this image."

CHAT_GREETING = "Hello! Ask me anything about your products."

# Messages de repli affichés quand l'appel IA échoue
GENERATION_FAILED_MESSAGE = "Failed to generate description"
CHAT_FAILED_MESSAGE = "Sorry, something went wrong. Please try again."
MISSING_PHOTO_MESSAGE = "Please upload a photo first!"
