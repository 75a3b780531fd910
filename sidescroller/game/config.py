# --- Display ---
WIDTH = 800                 # viewport width (px)
HEIGHT = 600
FPS = 60

# --- World ---
LEVEL_WIDTH = 2400          # 3 viewports wide
GOAL_X = 2250               # player.x beyond this wins
DEATH_Y = 600               # player.y beyond this is a fatal fall
CAMERA_LEAD = 1 / 3         # player sits a third of the way into the view
CLOUD_PARALLAX = 0.3

# --- Player (all speeds are px per tick) ---
PLAYER_START = (100.0, 100.0)
PLAYER_W = 40
PLAYER_H = 40
PLAYER_SPEED = 6.0
PLAYER_JUMP_POWER = 15.0
PLAYER_GRAVITY = 0.6
PLAYER_MAX_HEALTH = 5
INVINCIBLE_FRAMES = 90      # 1.5 s at 60 FPS
STOMP_BOUNCE = 10.0
FLICKER_FRAMES = 5          # invincibility blink window

# --- Collision tolerances (px) ---
LAND_TOLERANCE = 5.0        # previous bottom may sit this far below a platform top
STOMP_TOLERANCE = 10.0      # same, against an enemy head

# --- Enemy ---
ENEMY_W = 35
ENEMY_H = 35
ENEMY_SPEED = 2.0
ENEMY_GRAVITY = 0.6
ENEMY_DEFEAT_FRAMES = 30    # spin time before removal
ENEMY_DEFEAT_SPIN = 0.2     # radians per defeat tick

# --- Collectibles ---
COLLECTIBLE_SIZE = 25
COLLECTIBLE_SPIN = 0.1      # radians per tick
COLLECTIBLE_BOB = 5.0       # bob amplitude (px)
COIN_VALUE = 10
STAR_VALUE = 50
HEART_VALUE = 0
DOUBLE_JUMP_VALUE = 100
HEART_HEAL = 1

# --- Scoring ---
ENEMY_DEFEAT_BONUS = 50

# --- Colors (RGB) ---
COLOR_SKY_TOP = (135, 206, 235)
COLOR_SKY_BOTTOM = (224, 246, 255)
COLOR_CLOUD = (255, 255, 255, 153)     # 60% white
COLOR_PLAYER = (76, 175, 80)
COLOR_OUTLINE = (0, 0, 0)
COLOR_ENEMY = (244, 67, 54)
COLOR_ENEMY_DEFEATED = (255, 205, 210)
COLOR_PLAT = (121, 85, 72)
COLOR_PLAT_LINE = (93, 64, 55)
COLOR_PLAT_TOP = (161, 136, 127)
COLOR_PLAT_MOVING = (255, 152, 0)
COLOR_PLAT_MOVING_LINE = (245, 124, 0)
COLOR_PLAT_MOVING_TOP = (255, 183, 77)
COLOR_COIN = (255, 215, 0)
COLOR_COIN_SHINE = (255, 245, 157)
COLOR_COIN_RIM = (255, 160, 0)
COLOR_STAR = (255, 107, 107)
COLOR_STAR_RIM = (201, 42, 42)
COLOR_HEART = (233, 30, 99)
COLOR_DOUBLE_JUMP = (33, 150, 243)
COLOR_WHITE = (255, 255, 255)
COLOR_GOLD = (255, 215, 0)
COLOR_HUD_PANEL = (0, 0, 0, 180)
COLOR_OVERLAY = (0, 0, 0, 205)
COLOR_DANGER = (255, 107, 107)
COLOR_VICTORY = (76, 175, 80)
COLOR_HEALTH_EMPTY = (60, 60, 60)
