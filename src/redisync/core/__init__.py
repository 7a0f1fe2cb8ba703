"""Core building blocks shared by all redisync features."""
