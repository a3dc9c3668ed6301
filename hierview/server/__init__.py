"""Tree storage server"""
