# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy.orm import declarative_base

# Declarative base shared by every model
Base = declarative_base()
