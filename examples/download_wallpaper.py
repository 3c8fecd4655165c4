from bingpot import save_wallpaper

print(save_wallpaper())
