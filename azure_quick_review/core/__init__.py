"""Core scanning engine"""
