import os

DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'user_dashboard')
USERS_COLLECTION_NAME = 'users'
ORDERS_COLLECTION_NAME = 'orders'
ACCOUNTS_COLLECTION_NAME = 'accounts'
