from datetime import date, timedelta

from bingpot import get_images

today = date.today()
dates = [today - timedelta(days=i) for i in range(8, 16)]

out = get_images(dates=dates, today=today)

print(out)
