users_pk = 'users'
users_sk = '{user_id}'

users_emails_pk = 'users_emails'
users_emails_sk = '{email}'

restaurants_pk = 'restaurants'
restaurants_sk = '{restaurant_id}'

orders_pk = 'orders'
orders_sk = '{order_id}'
